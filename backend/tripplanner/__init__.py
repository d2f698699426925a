"""
Trip planner: a guided planning wizard on top of an external itinerary API.
"""
