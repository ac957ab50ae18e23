"""
ULAX league data sync.

Fetches schedule, standings, stats, rosters and championships from the
ULAX site and writes a consolidated JSON snapshot for the club website.
"""
