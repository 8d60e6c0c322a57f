import logging

from fastapi import APIRouter, Depends

from ..config import Settings
from ..dependencies import get_mount_controller, get_network_mount_service, get_settings
from ..services.mount_controller import MountLifecycleController
from ..services.network_mount import NetworkMountService

router = APIRouter(prefix="/api", tags=["uiactions"])


@router.get("/settings", response_model=Settings)
async def read_settings(settings: Settings = Depends(get_settings)):
    """Get current application settings"""

    logging.info("Settings endpoint called", extra={"operation": "api_settings"})
    return settings


@router.get("/config-info")
async def get_config_info(settings: Settings = Depends(get_settings)):
    """Get information about which configuration file is being used"""

    logging.info("Config info endpoint called", extra={"operation": "api_config_info"})
    return settings.config_file_info


@router.get("/platform")
async def get_platform_info(
    mount_service: NetworkMountService = Depends(get_network_mount_service),
):
    return mount_service.get_platform_info()


@router.post("/reload-config")
async def reload_config(controller: MountLifecycleController = Depends(get_mount_controller)):
    """Reload configuration from file and hand it to the running controller"""

    logging.info("Config reload requested", extra={"operation": "api_reload_config"})

    # Clear the settings cache first
    get_settings.cache_clear()
    try:
        new_settings = get_settings()
    except Exception as e:
        logging.error(f"Failed to reload configuration: {e}")
        return {"success": False, "message": f"Failed to reload configuration: {str(e)}"}

    controller.apply_settings(new_settings)
    config_info = new_settings.config_file_info
    logging.info(f"Configuration reloaded from: {config_info['active_config_file']}")

    return {
        "success": True,
        "message": "Configuration reloaded successfully",
        "config_file": config_info["active_config_file"],
        "hostname": config_info["hostname"],
        "check_interval": new_settings.check_interval,
    }
