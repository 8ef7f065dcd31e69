"""
GameStore application package.

Introduces a layered architecture:

  app/repositories/  — pure I/O: reading and writing ``games`` rows through
                       a SQLAlchemy session.
  app/services/      — business logic: payload coercion, CRUD rules and the
                       catalog reconciliation.

Route handlers in ``gamestore_server.py`` open a session per request, build
a repository over it and hand that to the services, giving a clean
separation between the HTTP layer and the domain.
"""
