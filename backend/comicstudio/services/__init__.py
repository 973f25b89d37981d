# Services package init
"""
Comic Studio Backend — Services Layer
======================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services receive a database session per call, apply business rules, and
       return response schemas. Singletons are exported for route handlers.

Service Inventory:
    - AssetStore (abstract): Interface for the external image host
    - ImageKitClient: Concrete AssetStore talking to the ImageKit REST API
    - AssetCleanupService: Fire-and-forget deletion of abandoned image references
    - AuthService: Registration, login, guest users, password hashing
    - SeriesService: Series CRUD with owner checks and cover replacement
    - ChapterService: Chapter CRUD and chapter-document reconciliation
"""
