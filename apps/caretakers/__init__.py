"""Caretakers app package.

Caretakers cover the building at weekends. Each weekend has a rota of
Saturday and Sunday shifts which is edited as a whole and synced against
the stored assignments.
"""
