# Services package init
"""
CloudNote Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services are constructed once in create_app() from Settings and stored
       on app.state; routes obtain them through the dependencies below.

Service Inventory:
    - TokenCodec: Issues and verifies bearer tokens
    - PasswordHasher / PasswordPolicy: bcrypt hashing and signup strength rules
    - AccountService: Signup, login, profile lookup
    - NoteService: Ownership-scoped note CRUD
"""

from fastapi import Request


def get_account_service(request: Request):
    """FastAPI dependency: the AccountService of the running application."""
    return request.app.state.account_service


def get_note_service(request: Request):
    """FastAPI dependency: the NoteService of the running application."""
    return request.app.state.note_service
