from .user import User
from .friendship import Friendship
