"""Tab expansion.

Every tab is measured against the run of text directly in front of it (back
to the previous tab or line start), not against an absolute column.
"""
