"""
services — thin per-table data access over the Supabase client.

One module per table group; every function fetches its own client via
get_supabase_client() and returns pydantic models. Reads are retried with
backoff, writes are not.
"""
