"""
The models package contains all the models used on the server.

.. autoclasstree:: smartcycle.models
"""

from .cycle import Cycle, CycleStatus, CycleCondition
from .ride import Ride, RideStatus
from .station import Station
from .user import User, UserRole
