from team_scheduler.models.game import Game
from team_scheduler.models.game_attendance import GameAttendance
from team_scheduler.models.game_series import GameSeries, SeriesTeam
from team_scheduler.models.player_availability import AvailabilityStatus, PlayerAvailability
from team_scheduler.models.recurring_pattern import Frequency, RecurringPattern
from team_scheduler.models.team import Team, TeamMember

__all__ = [
    "GameSeries",
    "SeriesTeam",
    "Team",
    "TeamMember",
    "RecurringPattern",
    "Frequency",
    "Game",
    "GameAttendance",
    "PlayerAvailability",
    "AvailabilityStatus",
]
