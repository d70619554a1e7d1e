"""Vault Search - keyword search with context snippets over extracted documents"""
