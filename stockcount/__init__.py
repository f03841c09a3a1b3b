"""Stock counting app: optimistic local state over a remote Supabase store."""
