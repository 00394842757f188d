"""레포지토리 패키지 — 도메인별 DB 접근 계층.

Repositories package — Per-domain database access layer.
Each module exposes singleton repository instances that take the
``AsyncSession`` as the first argument of every method.
"""
