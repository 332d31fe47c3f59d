"""
Services module for match analytics business logic.

This module organizes services into:
- analytics: pure statistics over a match list (records, morale, duels, goals)
- campaign: World Cup campaign progression and its persisted ledger
"""
