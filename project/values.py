import os

required_options = os.environ.get("SMB_REQUIRED_OPTIONS", "username,password")
allowed_options = os.environ.get(
    "SMB_ALLOWED_OPTIONS", "vers,uid,gid,file_mode,dir_mode,readonly,ro,domain,sec"
)
default_options = os.environ.get("SMB_DEFAULT_OPTIONS", "")

platform_name = os.environ.get("SMB_PLATFORM", "auto").lower()
scripts_path = os.environ.get(
    "SMB_SCRIPTS_PATH", "C:/var/vcap/jobs/smbdriver-windows/scripts"
)

init_mounts_path = os.environ.get("INIT_MOUNTS", "/mnt/init_mounts/mounts.json")
logging_config_path = os.environ.get("LOGGING_CONFIG_FILE", "/mnt/config/logging.json")
log_file = os.environ.get("LOG_FILE", "")
