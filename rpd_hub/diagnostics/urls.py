DEBUG_URL = "/api/debug"
DEBUG_TEST_EMAIL_URL = "/api/debug/test-email"
TEST_EMAIL_URL = "/api/test-email"
