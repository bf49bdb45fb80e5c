"""Services Layer — queries, transactions and orchestration around the pure core.

Invariants:
    - Services own commits; routes never touch the session directly
    - Business rules live in core/; services load rows and call into it

Design Decisions:
    - One service per concern (auth, profiles, availability, booking, reporting, seed)
"""
