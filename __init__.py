"""
ThankMap server.

A FastAPI and Socket.IO service that lets people drop short geotagged
gratitude messages on a world map and watch new ones appear live.
"""
