"""
Version 1 of the Rental Listings API.
"""
