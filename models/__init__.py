from .Base import Base
from .Weekday import Weekday
from .Host import Host, HostCreate, PublicHost
from .HostDB import HostDB
from .Availability import Availability, AvailabilitySlot, BulkAvailability, SlotType, TimeRange
from .AvailabilityDB import AvailabilityDB
from .Booking import Booking, BookingCreate, Offer
from .BookingDB import BookingDB
