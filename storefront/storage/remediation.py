# storefront/storage/remediation.py

"""Operator-facing remediation text for gateway setup and policy failures."""

from storefront.config.settings import Settings
from storefront.storage.catalog_gateway import (
    GatewayError,
    GatewayNotConfiguredError,
    MissingSchemaError,
    PermissionDeniedError,
)

SETUP_SQL = f"""\
create table if not exists public.{Settings.PRODUCTS_TABLE} (
  id text primary key,
  name text not null,
  category text not null,
  subcategory text,
  discounted_price numeric not null default 0,
  original_price numeric,
  description text,
  image text,
  rating numeric default 0,
  sales integer default 0,
  benefits jsonb default '[]'::jsonb,
  reviews jsonb default '[]'::jsonb
);
alter table public.{Settings.PRODUCTS_TABLE} enable row level security;
create policy "Public read" on public.{Settings.PRODUCTS_TABLE}
  for select using (true);
create policy "Public write" on public.{Settings.PRODUCTS_TABLE}
  for all using (true) with check (true);
"""

STORAGE_POLICY_SQL = f"""\
insert into storage.buckets (id, name, public)
  values ('{Settings.IMAGE_BUCKET}', '{Settings.IMAGE_BUCKET}', true)
  on conflict (id) do nothing;
create policy "Public image upload" on storage.objects
  for insert with check (bucket_id = '{Settings.IMAGE_BUCKET}');
create policy "Public image read" on storage.objects
  for select using (bucket_id = '{Settings.IMAGE_BUCKET}');
"""


def remediation_for(error: Exception, *, storage: bool = False) -> str:
    """Return actionable guidance for *error*, or ``""`` for generic failures."""
    if not isinstance(error, GatewayError):
        return ""
    if isinstance(error, GatewayNotConfiguredError):
        return "Set SUPABASE_URL and SUPABASE_KEY in your .env file."
    if isinstance(error, MissingSchemaError):
        if storage:
            return (
                f"Storage bucket '{Settings.IMAGE_BUCKET}' is missing. "
                "Run this SQL in your database dashboard:\n"
                + STORAGE_POLICY_SQL
            )
        return (
            f"Table '{Settings.PRODUCTS_TABLE}' is missing. "
            "Run this SQL in your database dashboard:\n" + SETUP_SQL
        )
    if isinstance(error, PermissionDeniedError):
        if storage:
            return (
                "Image upload was blocked by a storage policy. "
                "Allow uploads with:\n" + STORAGE_POLICY_SQL
            )
        return (
            "The request was blocked by row-level security. "
            f"Add read/write policies on '{Settings.PRODUCTS_TABLE}' "
            "(see the setup SQL)."
        )
    return ""
