"""Tests for uploader and API configuration."""
import pytest

from b2upload import APIConfig, ConfigError, UploaderConfig
from b2upload.core.api import DEFAULT_AUTHORIZE_URL, TimeoutConfig


class TestUploaderConfig:
    """Test suite for UploaderConfig."""
    
    def test_create_basic(self):
        """Test basic creation."""
        cfg = UploaderConfig(owner="alice", token="id:key", bucket="imgs")
        
        assert cfg.owner == "alice"
        assert cfg.bucket == "imgs"
        assert cfg.public_url is None
        assert cfg.has_public_url is False
    
    @pytest.mark.parametrize("field, kwargs", [
        ("token", {"owner": "alice", "token": "", "bucket": "imgs"}),
        ("bucket", {"owner": "alice", "token": "id:key", "bucket": ""}),
        ("owner", {"owner": "", "token": "id:key", "bucket": "imgs"}),
        ("token", {"owner": "alice", "token": "   ", "bucket": "imgs"}),
    ])
    def test_missing_required_field(self, field, kwargs):
        """Test empty required fields raise ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            UploaderConfig(**kwargs)
        
        assert exc_info.value.field == field
    
    def test_missing_token_checked_first(self):
        """Test token is reported before bucket."""
        with pytest.raises(ConfigError) as exc_info:
            UploaderConfig(owner="alice", token="", bucket="")
        
        assert exc_info.value.field == "token"
    
    def test_public_url_normalized(self):
        """Test public URL is stripped."""
        cfg = UploaderConfig(owner="a", token="t", bucket="b", public_url="  https://img.example.com ")
        
        assert cfg.public_url == "https://img.example.com"
        assert cfg.has_public_url is True
    
    def test_blank_public_url_is_none(self):
        """Test blank public URL means no override."""
        cfg = UploaderConfig(owner="a", token="t", bucket="b", public_url="  ")
        
        assert cfg.public_url is None
    
    def test_invalid_public_url(self):
        """Test non-http public URL raises error."""
        with pytest.raises(ConfigError, match="http"):
            UploaderConfig(owner="a", token="t", bucket="b", public_url="img.example.com")
    
    def test_repr_hides_token(self):
        """Test token never appears in repr."""
        cfg = UploaderConfig(owner="a", token="secret-key", bucket="b")
        
        assert "secret-key" not in repr(cfg)
    
    def test_frozen(self):
        """Test config is immutable."""
        cfg = UploaderConfig(owner="a", token="t", bucket="b")
        
        with pytest.raises(AttributeError):
            cfg.owner = "other"


class TestAPIConfig:
    """Test suite for APIConfig."""
    
    def test_defaults(self):
        """Test default values."""
        cfg = APIConfig.default()
        
        assert cfg.authorize_url == DEFAULT_AUTHORIZE_URL
        assert cfg.max_workers == 5
        assert cfg.timeout.total == 60.0
    
    def test_endpoint(self):
        """Test operation URLs."""
        cfg = APIConfig()
        
        assert cfg.endpoint("https://api001.example.com/", "list_file_names") == \
            "https://api001.example.com/b2api/v3/b2_list_file_names"
    
    def test_timeout_conversion(self):
        """Test conversion to aiohttp timeout."""
        timeout = TimeoutConfig(total=30, connect=5).to_aiohttp_timeout()
        
        assert timeout.total == 30
        assert timeout.connect == 5
