from .user import User, UserBase, UsernameUpdate
from .team import (
    MemberUser,
    Team,
    TeamBase,
    TeamCreate,
    TeamJoin,
    TeamMember,
    TeamWithMembers,
    UserTeam,
    WalletAddress,
)
from .wallet import GenerateTeamWallet, GenerateTeamWalletResponse, ProvisionedWallet
