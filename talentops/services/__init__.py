"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services enforce permissions and workflow rules, call repositories for DB
access and leave committing to the caller (router or script).
"""
