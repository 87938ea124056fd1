"""
Revenue deferral dates for order line items

Author: TM3
Date: 2025-11-20
"""
__version__ = "1.0.0"
