"""Constants for the TfNSW car park API.

API documentation: https://opendata.transport.nsw.gov.au/dataset/car-park-api
"""

TFNSW_DEFAULT_BASE_URL = "https://api.transport.nsw.gov.au/v1"
TFNSW_CARPARK_PATH = "/carpark"
TFNSW_API_NAME = "tfnsw_carpark"

# MessageDate values without an offset are local Sydney time
TFNSW_FEED_TIMEZONE = "Australia/Sydney"
