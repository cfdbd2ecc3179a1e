"""
user_profiles: the row UserService reads to answer "is this email or
username already taken". Supabase Auth owns credentials in auth.users;
this table mirrors the two lookup keys.

- id: uuid (primary key, references auth.users.id)
- email: text (unique, not null) - copied from auth.users.email, which
  Supabase stores lower-cased
- username: text (unique, not null) - copied from
  auth.users.raw_user_meta_data->>'username'
- created_at: timestamp (default: now())

An insert trigger on auth.users fills the row, so sign-up never writes
here. Lookups match the stored value exactly; callers pass the email
Supabase returned, not the one the user typed.
"""
