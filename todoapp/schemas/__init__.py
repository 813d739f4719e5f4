from .user import UserRegister, UserLogin, UserOut, UserSummary, ProfileUpdate, RoleUpdate
from .tokens import TokenPair, AuthResult, RefreshRequest
from .task import TaskCreate, TaskUpdate, TaskFilters, TaskOut, TaskStats
from .common import Pagination, envelope
