"""
API Views for the GreenZest storefront
"""
