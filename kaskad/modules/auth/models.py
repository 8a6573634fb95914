# Supabase Auth
# Sign up, sign in and token validation are handled by Supabase Auth (auth.users).
# public.profiles.id references auth.users.id with ON DELETE CASCADE, so removing
# an auth user removes their profile; see kaskad/database/schema.sql.

"""
Supabase Auth calls used here:
- auth.sign_up() - Register new users (full_name goes to user_metadata)
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Resolve the bearer token of a request
- auth.sign_out() - Logout users

A registered user has no profile until they POST /profiles; until then they
are authenticated but belong to no studio.
"""
