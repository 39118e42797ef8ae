# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from team_scheduler.models.game import Game  # noqa: F401
from team_scheduler.models.game_attendance import GameAttendance  # noqa: F401
from team_scheduler.models.game_series import GameSeries, SeriesTeam  # noqa: F401
from team_scheduler.models.player_availability import PlayerAvailability  # noqa: F401
from team_scheduler.models.recurring_pattern import RecurringPattern  # noqa: F401
from team_scheduler.models.team import Team, TeamMember  # noqa: F401
