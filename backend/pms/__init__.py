"""
Hotel front-office property management backend
"""
__version__ = "1.0.0"
