"""Fake rail host and endpoint paths shared by the HTTP tests."""

BASE_URL = "https://rail.test"
TOKEN_PATH = "/auth/realms/cdp/protocol/openid-connect/token"
QUOTE_PATH = "/amr/ras/api/v1_0/ras/quote"
CREATE_PATH = "/amr/ras/api/v1_0/ras/createtransaction"
CONFIRM_PATH = "/amr/ras/api/v1_0/ras/confirmtransaction"
ENQUIRE_PATH = "/amr/ras/api/v1_0/ras/enquire-transaction"
RATES_PATH = "/raas/masters/v1/rates"
CODES_PATH = "/raas/masters/v1/codes"
SERVICE_CORRIDOR_PATH = "/raas/masters/v1/service-corridor"
BANKS_PATH = "/raas/masters/v1/banks"
