"""Browser end-to-end test harness built on Playwright."""
