from enum import Enum

from .errors import UnknownRegion

SERVICE: str = "dynamodb"


class Region(Enum):
    """AWS regions supported by DynamoDB."""

    AF_SOUTH_1 = "af-south-1"
    AP_EAST_1 = "ap-east-1"
    AP_NORTHEAST_1 = "ap-northeast-1"
    AP_NORTHEAST_2 = "ap-northeast-2"
    AP_NORTHEAST_3 = "ap-northeast-3"
    AP_SOUTH_1 = "ap-south-1"
    AP_SOUTH_2 = "ap-south-2"
    AP_SOUTHEAST_1 = "ap-southeast-1"
    AP_SOUTHEAST_2 = "ap-southeast-2"
    AP_SOUTHEAST_3 = "ap-southeast-3"
    AP_SOUTHEAST_4 = "ap-southeast-4"
    CA_CENTRAL_1 = "ca-central-1"
    CA_WEST_1 = "ca-west-1"
    CN_NORTH_1 = "cn-north-1"
    CN_NORTHWEST_1 = "cn-northwest-1"
    EU_CENTRAL_1 = "eu-central-1"
    EU_CENTRAL_2 = "eu-central-2"
    EU_NORTH_1 = "eu-north-1"
    EU_SOUTH_1 = "eu-south-1"
    EU_SOUTH_2 = "eu-south-2"
    EU_WEST_1 = "eu-west-1"
    EU_WEST_2 = "eu-west-2"
    EU_WEST_3 = "eu-west-3"
    IL_CENTRAL_1 = "il-central-1"
    ME_CENTRAL_1 = "me-central-1"
    ME_SOUTH_1 = "me-south-1"
    SA_EAST_1 = "sa-east-1"
    US_EAST_1 = "us-east-1"
    US_EAST_2 = "us-east-2"
    US_GOV_EAST_1 = "us-gov-east-1"
    US_GOV_WEST_1 = "us-gov-west-1"
    US_WEST_1 = "us-west-1"
    US_WEST_2 = "us-west-2"

    @classmethod
    def parse(cls, value: str) -> "Region":
        """
        Look up a region by its identifier (e.g. ``"us-east-1"``).

        Only exact identifiers are accepted.

        :raises UnknownRegion: If ``value`` names no known region.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownRegion(value) from None

    @property
    def id(self) -> str:
        return self.value

    @property
    def endpoint(self) -> str:
        return _ENDPOINTS[self]

    @property
    def endpoint_url(self) -> str:
        return f"https://{self.endpoint}/"


def _endpoint_host(region: Region) -> str:
    suffix = "amazonaws.com.cn" if region.value.startswith("cn-") else "amazonaws.com"
    return f"{SERVICE}.{region.value}.{suffix}"


_ENDPOINTS = {region: _endpoint_host(region) for region in Region}


def id_for(region: Region) -> str:
    """Short identifier used in signing scopes."""
    return region.value


def endpoint_for(region: Region) -> str:
    """Default DynamoDB endpoint host for ``region``."""
    return _ENDPOINTS[region]
