"""
API route modules: stats, duels and campaign.
"""
