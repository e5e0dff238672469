"""
Standard error codes for service layer.

These error codes let callers (UI, CLI, API) handle specific failures
programmatically without parsing error message text.

Usage:
    from services.error_codes import INSUFFICIENT_PLAYERS
    from services.result import Result

    if len(roster) < MIN_ATTENDEES:
        return Result.fail("Need at least 8 attendees", code=INSUFFICIENT_PLAYERS)
"""

# General errors
VALIDATION_ERROR = "validation_error"

# Roster errors
INSUFFICIENT_PLAYERS = "insufficient_players"
TOO_MANY_PLAYERS = "too_many_players"
DUPLICATE_PLAYER = "duplicate_player"

# Allocation errors
INVALID_TEAM_COUNT = "invalid_team_count"
NO_TEAMS = "no_teams"

# Round / schedule errors
INVALID_ROUND_COUNT = "invalid_round_count"
ROUND_HAS_RESULTS = "round_has_results"
MIN_ROUNDS_REACHED = "min_rounds_reached"

# Result entry errors
MATCH_NOT_FOUND = "match_not_found"
INVALID_RESULT = "invalid_result"
