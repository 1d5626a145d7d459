"""journal/ -- Diary entries and their owner-scoped, date-filtered storage.

Layer rule: journal/ imports only core/, stdlib, and third-party libraries.
"""
