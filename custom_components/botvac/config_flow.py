"""Config flow for Botvac vacuum integration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_EMAIL, CONF_PASSWORD
from homeassistant.core import callback
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from botvac_client import AuthError, BotvacAccount, BotvacError, PasswordSession

from .const import (
    CONF_ECO_MODE,
    CONF_NAVIGATION_MODE,
    CONF_NO_GO_LINES,
    CONF_POLL_INTERVAL,
    DOMAIN,
    NAVIGATION_MODE_LIST,
    POLL_INTERVAL_DEFAULT,
    POLL_INTERVAL_MAX,
    POLL_INTERVAL_MIN,
)

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_EMAIL): str,
        vol.Required(CONF_PASSWORD): str,
    }
)


class BotvacConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Botvac vacuums."""

    VERSION = 1

    async def _async_validate(self, email: str, password: str) -> tuple[int, str | None]:
        """Log in and count the robots. Returns (robot count, error key)."""
        account = BotvacAccount(
            PasswordSession(async_get_clientsession(self.hass), email, password)
        )
        try:
            robots = await account.get_robots()
        except AuthError:
            return 0, "invalid_auth"
        except BotvacError:
            _LOGGER.exception("Unexpected error talking to the Botvac cloud")
            return 0, "cannot_connect"
        if not robots:
            return 0, "no_robots"
        return len(robots), None

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step: user enters account e-mail and password."""
        errors: dict[str, str] = {}

        if user_input is not None:
            email = user_input[CONF_EMAIL].strip()
            await self.async_set_unique_id(email.lower())
            self._abort_if_unique_id_configured()

            count, error = await self._async_validate(email, user_input[CONF_PASSWORD])
            if error is None:
                _LOGGER.info("Found %d robot(s) for %s", count, email)
                return self.async_create_entry(
                    title=email,
                    data={CONF_EMAIL: email, CONF_PASSWORD: user_input[CONF_PASSWORD]},
                )
            errors["base"] = error

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Start reauthentication after the password was rejected."""
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for the new password."""
        errors: dict[str, str] = {}
        entry = self._get_reauth_entry()

        if user_input is not None:
            _, error = await self._async_validate(
                entry.data[CONF_EMAIL], user_input[CONF_PASSWORD]
            )
            if error is None:
                return self.async_update_reload_and_abort(
                    entry,
                    data_updates={CONF_PASSWORD: user_input[CONF_PASSWORD]},
                )
            errors["base"] = error

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=vol.Schema({vol.Required(CONF_PASSWORD): str}),
            description_placeholders={"email": entry.data[CONF_EMAIL]},
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> BotvacOptionsFlow:
        return BotvacOptionsFlow()


class BotvacOptionsFlow(OptionsFlow):
    """Polling and cleaning preferences."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        if user_input is not None:
            return self.async_create_entry(data=user_input)

        options = self.config_entry.options
        schema = vol.Schema(
            {
                vol.Required(
                    CONF_POLL_INTERVAL,
                    default=options.get(CONF_POLL_INTERVAL, POLL_INTERVAL_DEFAULT),
                ): vol.All(
                    vol.Coerce(int),
                    vol.Range(min=POLL_INTERVAL_MIN, max=POLL_INTERVAL_MAX),
                ),
                vol.Required(
                    CONF_ECO_MODE, default=options.get(CONF_ECO_MODE, False)
                ): bool,
                vol.Required(
                    CONF_NAVIGATION_MODE,
                    default=options.get(CONF_NAVIGATION_MODE, NAVIGATION_MODE_LIST[0]),
                ): vol.In(NAVIGATION_MODE_LIST),
                vol.Required(
                    CONF_NO_GO_LINES, default=options.get(CONF_NO_GO_LINES, False)
                ): bool,
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema)
