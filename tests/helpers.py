"""Shared identifiers for test fixtures."""

CUSTOMER_ID = "01HZZZCUSTOMER000000000001"
OTHER_USER_ID = "01HZZZCUSTOMER000000000002"
ADMIN_ID = "01HZZZADMIN000000000000001"
