from dataclasses import dataclass
from typing import Optional

from supabase import create_client, Client

from app.config import Settings


@dataclass
class SupabaseClients:
    client: Client
    service_client: Optional[Client] = None

    @property
    def admin(self) -> Client:
        """Client with service_role key; bypasses RLS. Falls back to the anon client."""
        return self.service_client or self.client


def create_supabase_clients(settings: Settings) -> SupabaseClients:
    client = create_client(settings.supabase_url, settings.supabase_key)
    service_client = None
    if settings.supabase_service_role_key:
        service_client = create_client(
            settings.supabase_url, settings.supabase_service_role_key
        )
    return SupabaseClients(client=client, service_client=service_client)
