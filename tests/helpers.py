def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def cleared_cookies(response):
    """Names of cookies the response deletes."""
    names = set()
    for header in response.headers.get_list("set-cookie"):
        if "max-age=0" in header.lower():
            names.add(header.split("=", 1)[0])
    return names
