from keno_admin.database.supabase_client import SupabaseClient, get_supabase, get_service_supabase
from keno_admin.database.document_store import DocumentStore, DocumentPage
from keno_admin.database.identity_client import Identity, IdentityClient, IdentitySession
