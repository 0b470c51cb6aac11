"""Gym Console package.

Client-side attendance reconciliation for a gym admin/member console backed by
Supabase. Organized by feature modules (attendance, users, dashboard, ...) with
a thin Flask controller layer over service/repository layers.
"""
