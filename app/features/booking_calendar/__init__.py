"""
Booking calendar feature package.

Admin calendar views over class bookings: the pure aggregation engine,
date helpers, the repository that loads booking rows and the HTTP router
that serves week, month, custom range and day views.
"""
