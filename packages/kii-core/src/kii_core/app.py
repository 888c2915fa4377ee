from dataclasses import dataclass

HOST_NAMES = {
    "jp": "api-jp.kii.com",
    "us": "api.kii.com",
    "cn": "api-cn3.kii.com",
    "sg": "api-sg.kii.com",
}

@dataclass(frozen=True)
class App:
    """Application registered in Kii Cloud."""
    app_id: str
    app_key: str
    app_location: str

    @property
    def host_name(self) -> str:
        """
        Host name of the application endpoint.

        Known site codes are mapped to their regional host. Anything else is
        used as a literal host name, which allows pointing at custom or
        development deployments.
        """
        location = self.app_location.lower()
        return HOST_NAMES.get(location, location)

    @property
    def thing_if_base_url(self) -> str:
        """Base URL of the Thing Interaction Framework API."""
        return f"https://{self.host_name}/thing-if/apps/{self.app_id}"

    @property
    def kii_cloud_base_url(self) -> str:
        """Base URL of the Kii Cloud API."""
        return f"https://{self.host_name}/api/apps/{self.app_id}"

    def __str__(self):
        return f"App {self.app_id} @ {self.host_name}"
