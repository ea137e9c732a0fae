"""Credit Review Dashboard - Services"""
