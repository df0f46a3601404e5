"""
flightseed: synthetic flight-schedule seeding for the booking application.

Generates a plausible population of flights over a date window from the
airports and airlines already in the datastore, then replaces any prior
flights in that window with the new batch:
1. Schedule planning (flights per day, departure times)
2. Flight synthesis (route, timing, aircraft, fares, seat map)
3. Replace-then-insert loading in fixed-size chunks
"""

__version__ = "0.1.0"
