# MIT License
#
# Copyright (c) 2025 Democratize Technology
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Stock configuration sections for common service dependencies.

These are plain data containers meant to be embedded in a service's root
schema, e.g.:

    class ServiceConfig(ConfigSchema):
        env: str = setting("env", env="APP_ENV", required=True)
        database: Database = setting("database")
        grpc: Grpc = setting("grpc")

        def environment_name(self) -> str:
            return self.env
"""

from datetime import timedelta
from typing import Literal

from .schema import ConfigSchema, setting

_UINT32_MAX = 2**32 - 1
_INT32_MAX = 2**31 - 1


class Database(ConfigSchema):
    """Relational database connection and migration settings."""

    type: str = setting("type", required=True, description="Database driver, e.g. postgres")
    host: str = setting("host", required=True)
    port: int = setting("port", required=True, ge=0, le=65535)
    name: str = setting("name", required=True)
    user: str = setting("user", required=True)
    password: str = setting("password", required=True, secret=True)
    schema_name: str = setting("schema", default="public")
    migration_path: str = setting("migrationPath", required=True)
    max_attempts: int = setting("maxAttempts", required=True, ge=0)
    attempt_delay: timedelta = setting("attemptDelay", required=True)


class Redis(ConfigSchema):
    """Cache server settings."""

    host: str = setting("host", required=True)
    port: int = setting("port", required=True, ge=0, le=65535)
    db: int = setting("db", ge=0)


class KafkaProducer(ConfigSchema):
    """Message broker producer settings."""

    brokers: list[str] = setting("brokers", required=True)
    required_acks: int = setting(
        "requiredAcks",
        default=1,
        ge=-1,
        le=1,
        description="Acknowledgement level: 0 none, 1 leader, -1 all replicas",
    )
    async_: bool = setting("async", default=False)
    batch_size: int = setting("batchSize", default=100, ge=1)
    batch_timeout: timedelta = setting("batchTimeout", default="1s")
    write_timeout: timedelta = setting("writeTimeout", default="10s")
    max_attempts: int = setting("maxAttempts", default=3, ge=0)


class KafkaConsumer(ConfigSchema):
    """Message broker consumer group settings."""

    brokers: list[str] = setting("brokers", required=True)
    group_id: str = setting("groupId", required=True)
    topics: list[str] = setting("topics", required=True)
    start_offset: Literal["latest", "earliest"] = setting("startOffset", default="latest")

    min_bytes: int = setting("minBytes", default=10_000, description="Minimum fetch batch size")
    max_bytes: int = setting("maxBytes", default=10_000_000, description="Maximum fetch batch size")
    max_wait: timedelta = setting("maxWait", default="1s", description="Longest wait for min_bytes")

    commit_interval: timedelta = setting(
        "commitInterval",
        default="1s",
        description="Auto-commit interval, 0 disables auto-commit",
    )
    heartbeat_interval: timedelta = setting("heartbeatInterval", default="3s")
    session_timeout: timedelta = setting("sessionTimeout", default="30s")
    rebalance_timeout: timedelta = setting("rebalanceTimeout", default="60s")

    dial_timeout: timedelta = setting("dialTimeout", default="3s")
    read_timeout: timedelta = setting("readTimeout", default="30s")
    write_timeout: timedelta = setting("writeTimeout", default="10s")
    max_attempts: int = setting("maxAttempts", default=3, ge=0)


class KafkaTopics(ConfigSchema):
    """Topics to provision on the broker."""

    names: list[str] = setting("list", required=True)
    num_partitions: int = setting("numPartitions", required=True, ge=1)
    replication_factor: int = setting("replicationFactor", required=True, ge=1)


class GrpcServer(ConfigSchema):
    """RPC server listener, TLS, keepalive and limit settings."""

    host: str = setting("host", env="GRPC_HOST", default="0.0.0.0")
    port: int = setting("port", env="GRPC_PORT", required=True, ge=0, le=65535)

    enable_tls: bool = setting("enableTLS", env="GRPC_ENABLE_TLS", default=False)
    cert_file: str = setting("certFile", env="GRPC_CERT_FILE")
    key_file: str = setting("keyFile", env="GRPC_KEY_FILE")
    client_ca_file: str = setting(
        "clientCAFile",
        env="GRPC_CLIENT_CA_FILE",
        description="Client CA bundle for mutual TLS",
    )

    # Zero durations leave the transport defaults in place
    keep_alive_max_connection_idle: timedelta = setting(
        "keepAliveMaxConnectionIdle",
        env="GRPC_KEEP_ALIVE_MAX_CONNECTION_IDLE",
        default="0s",
    )
    keep_alive_max_connection_age: timedelta = setting(
        "keepAliveMaxConnectionAge",
        env="GRPC_KEEP_ALIVE_MAX_CONNECTION_AGE",
        default="0s",
    )
    keep_alive_max_connection_age_grace: timedelta = setting(
        "keepAliveMaxConnectionAgeGrace",
        env="GRPC_KEEP_ALIVE_MAX_CONNECTION_AGE_GRACE",
        default="0s",
    )
    keep_alive_server_time: timedelta = setting(
        "keepAliveServerTime",
        env="GRPC_KEEP_ALIVE_SERVER_TIME",
        default="2h",
    )
    keep_alive_server_timeout: timedelta = setting(
        "keepAliveServerTimeout",
        env="GRPC_KEEP_ALIVE_SERVER_TIMEOUT",
        default="20s",
    )

    keep_alive_enforcement_min_time: timedelta = setting(
        "keepAliveEnforcementPolicyMinTime",
        env="GRPC_KEEP_ALIVE_ENFORCEMENT_MIN_TIME",
        default="5m",
    )
    keep_alive_enforcement_permit_without_stream: bool = setting(
        "keepAliveEnforcementPolicyPermitWithoutStream",
        env="GRPC_KEEP_ALIVE_ENFORCEMENT_PERMIT_WITHOUT_STREAM",
        default=False,
    )

    max_receive_message_size: int = setting(
        "maxReceiveMessageSize",
        env="GRPC_MAX_RECEIVE_MESSAGE_SIZE",
        default=4_194_304,
        ge=0,
    )
    max_send_message_size: int = setting(
        "maxSendMessageSize",
        env="GRPC_MAX_SEND_MESSAGE_SIZE",
        default=0,
        ge=0,
    )

    max_concurrent_streams: int = setting(
        "maxConcurrentStreams",
        env="GRPC_MAX_CONCURRENT_STREAMS",
        default=0,
        ge=0,
        le=_UINT32_MAX,
    )
    initial_window_size: int = setting(
        "initialWindowSize",
        env="GRPC_INITIAL_WINDOW_SIZE",
        default=0,
        ge=0,
        le=_INT32_MAX,
    )
    initial_conn_window_size: int = setting(
        "initialConnWindowSize",
        env="GRPC_INITIAL_CONN_WINDOW_SIZE",
        default=0,
        ge=0,
        le=_INT32_MAX,
    )

    read_buffer_size: int = setting("readBufferSize", env="GRPC_READ_BUFFER_SIZE", default=32_768)
    write_buffer_size: int = setting("writeBufferSize", env="GRPC_WRITE_BUFFER_SIZE", default=32_768)

    enable_health_check_service: bool = setting(
        "enableHealthCheckService",
        env="GRPC_ENABLE_HEALTH_CHECK_SERVICE",
        default=True,
    )
    enable_reflection_service: bool = setting(
        "enableReflectionService",
        env="GRPC_ENABLE_REFLECTION_SERVICE",
        default=True,
    )

    graceful_shutdown_timeout: timedelta = setting(
        "gracefulShutdownTimeout",
        env="GRPC_GRACEFUL_SHUTDOWN_TIMEOUT",
        default="30s",
    )
    connection_timeout: timedelta = setting(
        "connectionTimeout",
        env="GRPC_CONNECTION_TIMEOUT",
        default="120s",
    )


class GrpcClient(ConfigSchema):
    """Outbound RPC client settings."""

    host: str = setting("host", env="HOST", required=True)
    port: int = setting("port", env="PORT", required=True, ge=0, le=65535)
    user_agent: str = setting("userAgent", env="USER_AGENT")

    enable_tls: bool = setting("enableTLS", env="ENABLE_TLS", default=False)
    ca_cert_file: str = setting("caCertFile", env="CA_CERT_FILE")
    client_cert_file: str = setting("clientCertFile", env="CLIENT_CERT_FILE")
    client_key_file: str = setting("clientKeyFile", env="CLIENT_KEY_FILE")
    server_name_override: str = setting("serverNameOverride", env="SERVER_NAME_OVERRIDE")

    connect_max_attempts: int = setting("connectMaxAttempts", env="CONNECT_MAX_ATTEMPTS", default=5)
    connect_initial_backoff: timedelta = setting(
        "connectInitialBackoff",
        env="CONNECT_INITIAL_BACKOFF",
        default="250ms",
    )
    connect_max_backoff: timedelta = setting(
        "connectMaxBackoff",
        env="CONNECT_MAX_BACKOFF",
        default="5s",
    )
    connect_backoff_multiplier: float = setting(
        "connectBackoffMultiplier",
        env="CONNECT_BACKOFF_MULTIPLIER",
        default=2.0,
    )

    dial_timeout: timedelta = setting(
        "dialTimeout",
        env="DIAL_TIMEOUT",
        default="5s",
        description="Timeout for each individual connection attempt",
    )

    keep_alive_time: timedelta = setting("keepAliveTime", env="KEEP_ALIVE_TIME", default="30s")
    keep_alive_timeout: timedelta = setting("keepAliveTimeout", env="KEEP_ALIVE_TIMEOUT", default="20s")
    permit_without_stream: bool = setting("permitWithoutStream", env="PERMIT_WITHOUT_STREAM", default=True)

    max_recv_msg_size: int = setting("maxRecvMsgSize", env="MAX_RECV_MSG_SIZE", default=4_194_304)
    max_send_msg_size: int = setting("maxSendMsgSize", env="MAX_SEND_MSG_SIZE", default=4_194_304)


class Grpc(ConfigSchema):
    """RPC server plus any number of outbound clients."""

    server: GrpcServer = setting("server")
    clients: list[GrpcClient] = setting("clients")
