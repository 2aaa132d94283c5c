"""Storage collaborators."""

from .accounts import AccountStore, InMemoryAccountStore

__all__ = ['AccountStore', 'InMemoryAccountStore']
