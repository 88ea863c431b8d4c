"""
Household jobs service.

Job lifecycle, applications, messaging and in-app notifications for a
household services marketplace.
"""

__version__ = "0.1.0"
__description__ = "Household jobs lifecycle and notification service"
