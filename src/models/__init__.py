from sqlmodel import SQLModel
from .user import User
from .team import Team, TeamBase
from .team_member import TeamMember, TeamRole
