"""Habit tracking core: recurrence, completion ledger, filtering and statistics"""
