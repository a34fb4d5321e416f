import logging
import os

import dash
from dash import Dash, Output, Input, State
import dash_mantine_components as dmc

from services.cache import init_cache
from services.config import LOG_FORMAT, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

# Enforce React 18 for DMC 2.x
try:
    from dash._dash_renderer import _set_react_version
    _set_react_version("18.2.0")
except (ImportError, AttributeError):
    pass

# Runtime version guard
def _check_versions():
    import dash_mantine_components as dmc_local
    dash_version = dash.__version__
    dmc_version = getattr(dmc_local, "__version__", "unknown")
    if not (dash_version.startswith("2.") and dmc_version.startswith("2.")):
        raise RuntimeError(
            f"Version mismatch. Expected Dash 2.x + DMC 2.x. "
            f"Found Dash {dash_version}, DMC {dmc_version}. "
            f"Reinstall the project dependencies."
        )
_check_versions()

NAV_LINKS = [
    ("Inventory", "/"),
    ("Add Product", "/add-product"),
]

app = Dash(__name__, use_pages=True, suppress_callback_exceptions=True, title="Inventory Management")


def sidebar_links():
    return [
        dmc.NavLink(label=label, href=href, variant="subtle", fw=500)
        for label, href in NAV_LINKS
    ]


# Expose Flask server for Gunicorn
server = app.server
init_cache(server)

app.layout = dmc.MantineProvider(
    theme={
        "fontFamily": "'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif",
        "headings": {
            "fontFamily": "'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif",
            "fontWeight": "600"
        }
    },
    children=dmc.AppShell(
        id="appshell",
        padding="sm",
        navbar={
            "width": 240,
            "breakpoint": "sm",
            "collapsed": {"mobile": True, "desktop": False},
        },
        header={
            "height": 60,
        },
        children=[
            dmc.AppShellHeader(
                children=[
                    dmc.Group(
                        children=[
                            dmc.Burger(
                                id="nav-burger",
                                opened=False,
                                size="sm",
                                hiddenFrom="sm",
                            ),
                            dmc.Title("Inventory Management", order=4, ml="md"),
                        ],
                        h="100%",
                        px="md",
                        align="center"
                    )
                ]
            ),
            dmc.AppShellNavbar(
                id="app-navbar",
                p="md",
                children=[
                    dmc.Stack(
                        [
                            dmc.Title("Inventory", order=3),
                            dmc.Divider(),
                            *sidebar_links(),
                        ],
                        gap="sm",
                    )
                ],
            ),
            dmc.AppShellMain(
                dmc.Container(dash.page_container, size="responsive", px="md", py="lg"),
            )
        ],
    ),
)


@app.callback(
    Output("appshell", "navbar"),
    Input("nav-burger", "opened"),
    State("appshell", "navbar"),
    prevent_initial_call=False,
)
def toggle_navbar(opened, navbar):
    navbar["collapsed"] = {"mobile": not opened, "desktop": False}
    return navbar


if __name__ == '__main__':
    logger.info("Starting inventory dashboard")
    app.run(
        host=os.environ.get('DASH_HOST', '0.0.0.0'),
        port=int(os.environ.get('DASH_PORT', '8050')),
        debug=os.environ.get('DASH_DEBUG', 'false').lower() == 'true',
    )
