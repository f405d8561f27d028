from events.providers.interfaces import EventProvider
from events.providers.ticketmaster import TicketmasterClient

__all__ = ["EventProvider", "TicketmasterClient"]
