"""
PowerCell: battery shop billing, stock, exchange and UPI checkout service.
"""
