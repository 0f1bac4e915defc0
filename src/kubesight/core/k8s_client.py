import asyncio
import logging
import os
import typing

from kubernetes_asyncio import client, config

logger = logging.getLogger(__name__)

# Global lock to prevent race conditions during config loading
_CONFIG_LOCK = asyncio.Lock()
_CONFIG_LOADED = False


def resolve_kubeconfig(explicit: typing.Optional[str] = None) -> typing.Optional[str]:
    """
    Resolves the kubeconfig path: explicit value, then $KUBECONFIG, then ~/.kube/config.
    Returns None when the home directory cannot be determined.
    """
    if explicit:
        return os.path.expanduser(explicit)

    env = os.getenv("KUBECONFIG")
    if env:
        return env

    home = os.path.expanduser("~")
    if not home or home == "~":
        return None
    return os.path.join(home, ".kube", "config")


async def ensure_k8s_config(
    kubeconfig: typing.Optional[str] = None,
    context: typing.Optional[str] = None,
) -> bool:
    """
    Ensures that the Kubernetes configuration is loaded exactly once.

    In-cluster configuration is tried first unless a kubeconfig path or a
    context was asked for explicitly.

    Returns:
        bool: True if config was loaded successfully (or was already loaded), False otherwise.
    """
    global _CONFIG_LOADED

    if _CONFIG_LOADED:
        return True

    async with _CONFIG_LOCK:
        # Double-check locking pattern
        if _CONFIG_LOADED:
            return True

        if not kubeconfig and not context:
            try:
                logger.debug("Attempting to load in-cluster Kubernetes config...")
                config.load_incluster_config()
                logger.info("Loaded in-cluster Kubernetes configuration.")
                _CONFIG_LOADED = True
                return True
            except config.ConfigException:
                logger.debug("In-cluster config not found.")

        config_file = resolve_kubeconfig(kubeconfig)
        if not config_file:
            logger.warning("Could not resolve a kubeconfig path.")
            return False

        try:
            logger.debug("Attempting to load kubeconfig %s (context=%s)...", config_file, context)
            await config.load_kube_config(config_file=config_file, context=context)
            logger.info("Loaded Kubernetes configuration from kubeconfig file.")
            _CONFIG_LOADED = True
            return True
        except config.ConfigException as e:
            logger.warning("Could not load kubeconfig %s: %s", config_file, e)
        except OSError as e:
            logger.warning("Could not read kubeconfig %s: %s", config_file, e)

    logger.warning("Failed to load any Kubernetes configuration.")
    return False


async def get_core_v1_api(
    kubeconfig: typing.Optional[str] = None,
    context: typing.Optional[str] = None,
) -> typing.Optional[client.CoreV1Api]:
    """
    Returns a configured CoreV1Api instance.
    Safe to call concurrently.
    """
    if await ensure_k8s_config(kubeconfig, context):
        return client.CoreV1Api()
    return None


async def get_custom_objects_api(
    kubeconfig: typing.Optional[str] = None,
    context: typing.Optional[str] = None,
) -> typing.Optional[client.CustomObjectsApi]:
    """Returns a configured CustomObjectsApi, used for metrics.k8s.io."""
    if await ensure_k8s_config(kubeconfig, context):
        return client.CustomObjectsApi()
    return None
