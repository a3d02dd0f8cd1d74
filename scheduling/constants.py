# Reservation.status
CONFIRMED = "CONFIRMED"
OCCUPIED = "OCCUPIED"
COMPLETED = "COMPLETED"
CANCELLED = "CANCELLED"
RESERVATION_STATUSES = (CONFIRMED, OCCUPIED, COMPLETED, CANCELLED)

# Reservation.type
CLASS = "CLASS"
EVENT = "EVENT"
RESERVATION_TYPES = (CLASS, EVENT)

# derived lab status, never stored
LAB_FREE = "FREE"
LAB_RESERVED = "RESERVED"
LAB_OCCUPIED = "OCCUPIED"
LAB_OVERDUE = "OVERDUE"
