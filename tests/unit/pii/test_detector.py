"""Unit tests for the sensitive-data detector."""

import pytest

from ai_proxy.pii.detector import contains_sensitive_data, find_sensitive_categories


class TestContainsSensitiveData:
    """Test pattern-match classification."""

    @pytest.mark.parametrize(
        "text",
        [
            "My SSN is 123-45-6789",
            "card 4111111111111111 expires soon",
            "contact me at jane.doe@example.com",
            "what is my Password again?",
            "here is the API token",
            "비밀번호를 잊어버렸어요",
            "주민등록번호 확인 부탁드립니다",
            "사번은 1234입니다",
            "계좌 이체 내역",
        ],
    )
    def test_sensitive_text_is_flagged(self, text):
        assert contains_sensitive_data(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "Summarize the release notes",
            "Order 12345 shipped on 2024-01-02",
            "call 555-1234",
            "",
        ],
    )
    def test_ordinary_text_is_not_flagged(self, text):
        assert contains_sensitive_data(text) is False


class TestFindSensitiveCategories:
    def test_reports_every_matching_category(self):
        categories = find_sensitive_categories("mail a@b.io my password and 123-45-6789")
        assert categories == ["SSN", "EMAIL", "SECRET_KEYWORD"]

    def test_card_number_length_bounds(self):
        assert find_sensitive_categories("123456789012") == []
        assert find_sensitive_categories("1234567890123") == ["CARD_NUMBER"]
        assert find_sensitive_categories("12345678901234567") == []
