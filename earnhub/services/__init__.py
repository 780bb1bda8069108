"""
Services.

Business logic, grouped by area:
- withdrawal: Eligibility, submission and admin disposition
- referral: Referral cascade, codes, settings and statistics
- profit: Periodic profit crediting and offer expiry
- deposit: Deposit requests
- gamification: Badges and levels
- user: Registration
"""
