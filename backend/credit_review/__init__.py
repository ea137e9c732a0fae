"""Credit Review Dashboard - backend package"""
