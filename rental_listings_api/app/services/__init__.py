"""
Service layer.

One service class per backend table translates a domain operation into
a backend call and reshapes the result.  ``AuthService``,
``ListingManagementService`` and ``StatisticsService`` compose those
table services into the operations the API exposes.
"""
