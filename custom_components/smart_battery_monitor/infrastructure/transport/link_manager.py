# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Link manager for the battery controller telemetry link.

This module implements the connection lifecycle with:
- Name-matched discovery with a scan timeout
- One channel, one inbound reader and one poller per connection
- Decoding inbound lines into device state
- Serialized outbound commands
- Observable snapshots for the host

All state changes run on a single worker task fed by a mailbox, so
discovery results, inbound data, poll ticks, timers and public operations
never interleave.
"""

import asyncio
import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from ...const import (
    STATUS_CONNECTED,
    STATUS_CONNECTING,
    STATUS_CONNECTION_FAILED,
    STATUS_DISCONNECTED,
    STATUS_DISCONNECTING,
    STATUS_NO_DEVICE,
    STATUS_SCAN_FAILED,
    STATUS_SCANNING,
)
from ...domain.entities import LinkSnapshot, LinkStateStore
from ...domain.exceptions import LinkError, SendFailedError
from ...domain.interfaces import IChannel, IFrameCodec, ITransport
from ...domain.value_objects import (
    Command,
    ConnectionPhase,
    DiscoveredDevice,
    FilterMode,
    LinkConfig,
    OperatingMode,
    ParseDegradedEvent,
    RawCommand,
    RelayAddress,
    RelayRole,
    SetModeCommand,
    SetRelayCommand,
    StatusCommand,
)
from ..decorators import handle_link_errors, require_connection
from ..protocol import LineAssembler, TextFrameCodec
from ..state_machines import LinkEvent, LinkStateMachine
from .command_dispatcher import CommandDispatcher
from .poller import Poller

_LOGGER = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]


@dataclass
class _Job:
    """One mailbox entry."""

    handler: Handler
    args: tuple = ()
    session: Optional[int] = None
    future: Optional[asyncio.Future] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", repr(self.handler))


class LinkManager:
    """Owns the link to one battery controller.

    Lifecycle:
        DISCONNECTED -> SCANNING -> CONNECTING -> CONNECTED
        -> DISCONNECTING -> DISCONNECTED

    Public operations never raise. Failures end up in the phase, the
    status line and the activity log of the published snapshot.

    Background activities (discovery, scan timer, connect attempt,
    inbound reader, poller) only post events to the mailbox. Each event
    carries the session number current when the activity started; events
    from a session that has since been torn down are dropped.

    Attributes:
        config: Link settings

    Example:
        >>> manager = LinkManager(transport, LinkConfig(battery_count=3))
        >>> remove = manager.add_listener(lambda snap: print(snap.status))
        >>> await manager.start_scanning()
        Scanning...
        >>> await manager.set_mode("manual")
        >>> await manager.async_shutdown()
    """

    def __init__(
        self,
        transport: ITransport,
        config: Optional[LinkConfig] = None,
        codec: Optional[IFrameCodec] = None,
    ):
        """Initialize link manager.

        Args:
            transport: Transport used for discovery and connections
            config: Link settings (defaults apply when omitted)
            codec: Frame codec (text protocol for config.battery_count if omitted)
        """
        self.config = config or LinkConfig()
        self._transport = transport
        self._codec = codec or TextFrameCodec(self.config.battery_count)
        self._store = LinkStateStore(self.config.battery_count, self.config.log_capacity)
        self._machine = LinkStateMachine()
        self._machine.add_transition_listener(self._on_transition)
        self._dispatcher = CommandDispatcher(self._codec)
        self._assembler = LineAssembler()

        self._mailbox: "asyncio.Queue[_Job]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None
        self._session_id = 0
        self._dirty = False

        self._channel: Optional[IChannel] = None
        self._discovery_task: Optional[asyncio.Task] = None
        self._scan_timer: Optional[asyncio.Task] = None
        self._connect_task: Optional[asyncio.Task] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._poller: Optional[Poller] = None

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def phase(self) -> ConnectionPhase:
        """Current connection phase."""
        return self._machine.state

    @property
    def is_connected(self) -> bool:
        """True in the CONNECTED phase."""
        return self._machine.is_connected

    @property
    def snapshot(self) -> LinkSnapshot:
        """Immutable view of the current state."""
        return self._store.snapshot()

    def add_listener(self, listener: Callable[[LinkSnapshot], None]) -> Callable[[], None]:
        """Subscribe to state changes.

        Args:
            listener: Called with a LinkSnapshot after every change

        Returns:
            Callable that removes the listener
        """
        return self._store.add_listener(listener)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    @handle_link_errors("Start scan", reraise=False)
    async def start_scanning(self) -> None:
        """Scan for the controller and connect to the first match."""
        await self._submit(self._do_start_scanning)

    @handle_link_errors("Connect", reraise=False)
    async def connect_to_device(self, address: str, name: Optional[str] = None) -> None:
        """Connect to a known address, cancelling any scan in progress.

        An existing connection is torn down first.

        Args:
            address: Device address
            name: Display name, defaults to the address
        """
        await self._submit(self._do_connect, address, name)

    @handle_link_errors("Disconnect", reraise=False)
    async def disconnect(self) -> None:
        """Tear the link down. Safe from any phase."""
        await self._submit(self._do_disconnect)

    @handle_link_errors("Send command", reraise=False)
    async def send_command(self, text: str) -> None:
        """Send one raw text line to the controller."""
        await self._submit(self._do_send_command, text)

    @handle_link_errors("Refresh", reraise=False)
    async def refresh(self) -> None:
        """Request a status frame now, even in manual mode."""
        await self._submit(self._do_refresh)

    @handle_link_errors("Set mode", reraise=False)
    async def set_mode(self, mode: Union[OperatingMode, str]) -> None:
        """Switch the controller between AUTO and MANUAL.

        MANUAL suspends automatic polling; AUTO resumes it.

        Args:
            mode: OperatingMode or its case-insensitive name
        """
        if not isinstance(mode, OperatingMode):
            mode = OperatingMode.parse(mode)
        await self._submit(self._do_set_mode, mode)

    @handle_link_errors("Toggle relay", reraise=False)
    async def toggle_relay(self, index: int) -> None:
        """Flip one relay.

        Args:
            index: 0-based relay index (0 .. 2N-1)
        """
        await self._submit(self._do_toggle_relay, index)

    @handle_link_errors("Set battery relay", reraise=False)
    async def set_battery_relay(
        self, battery: int, role: Union[RelayRole, str], on: bool
    ) -> None:
        """Switch the charge or discharge relay of one battery.

        Args:
            battery: 0-based battery index
            role: RelayRole or "charge"/"discharge"
            on: Requested relay state
        """
        if not isinstance(role, RelayRole):
            role = RelayRole(role.strip().lower())
        await self._submit(self._do_set_battery_relay, battery, role, on)

    @handle_link_errors("Set filter", reraise=False)
    async def set_filter(self, filter_mode: Union[FilterMode, str]) -> None:
        """Choose which batteries the snapshot lists as filtered."""
        if not isinstance(filter_mode, FilterMode):
            filter_mode = FilterMode.parse(filter_mode)
        await self._submit(self._do_set_filter, filter_mode)

    async def async_shutdown(self) -> None:
        """Disconnect and stop the worker."""
        await self.disconnect()
        worker, self._worker = self._worker, None
        if worker is None:
            return
        worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass
        while not self._mailbox.empty():
            job = self._mailbox.get_nowait()
            if job.future is not None and not job.future.done():
                job.future.cancel()
        _LOGGER.debug("Link manager stopped")

    # ------------------------------------------------------------------
    # Mailbox
    # ------------------------------------------------------------------

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(
                self._run_worker(), name="smart_battery_link_worker"
            )

    async def _submit(self, handler: Handler, *args: Any) -> Any:
        """Run a handler on the worker and wait for its result."""
        self._ensure_worker()
        future = asyncio.get_running_loop().create_future()
        await self._mailbox.put(_Job(handler, args, None, future))
        return await future

    def _post(self, handler: Handler, *args: Any, session: Optional[int] = None) -> None:
        """Queue a handler without waiting; dropped if its session is stale."""
        self._ensure_worker()
        self._mailbox.put_nowait(_Job(handler, args, session))

    async def _run_worker(self) -> None:
        while True:
            job = await self._mailbox.get()
            try:
                if job.session is not None and job.session != self._session_id:
                    _LOGGER.debug(
                        "Dropping %s from stale session %d (current %d)",
                        job.name,
                        job.session,
                        self._session_id,
                    )
                    result = None
                else:
                    result = await job.handler(*job.args)
            except asyncio.CancelledError:
                if job.future is not None and not job.future.done():
                    job.future.cancel()
                raise
            except Exception as err:
                if job.future is not None and not job.future.done():
                    job.future.set_exception(err)
                else:
                    _LOGGER.error("Error handling %s: %s", job.name, err, exc_info=True)
            else:
                if job.future is not None and not job.future.done():
                    job.future.set_result(result)
            finally:
                self._mailbox.task_done()
                self._publish_if_dirty()

    def _publish_if_dirty(self) -> None:
        if self._dirty:
            self._dirty = False
            self._store.notify()

    def _publish(self) -> None:
        """Publish immediately, e.g. for short-lived intermediate phases."""
        self._dirty = False
        self._store.notify()

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self._store.log(message, level)
        self._dirty = True

    def _on_transition(
        self, previous: ConnectionPhase, new: ConnectionPhase, event: LinkEvent
    ) -> None:
        self._store.session.phase = new
        self._dirty = True

    def _new_session(self) -> int:
        self._session_id += 1
        return self._session_id

    def _set_status(self, status: str) -> None:
        self._store.session.status = status
        self._dirty = True

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    async def _do_start_scanning(self) -> None:
        if self._machine.is_scanning:
            _LOGGER.debug("Scan already in progress")
            return
        if not self._machine.transition(LinkEvent.START_SCAN):
            self._log(f"Cannot scan while {self._machine.state}", logging.WARNING)
            return

        session = self._new_session()
        self._store.session.device_name = None
        self._store.session.device_address = None
        self._set_status(STATUS_SCANNING)
        self._log("Scanning for devices...")

        self._discovery_task = asyncio.create_task(
            self._run_discovery(session), name="smart_battery_discovery"
        )
        self._scan_timer = asyncio.create_task(
            self._run_scan_timer(session), name="smart_battery_scan_timer"
        )

    async def _run_discovery(self, session: int) -> None:
        try:
            async for device in self._transport.discover():
                self._post(self._do_device_found, device, session=session)
        except asyncio.CancelledError:
            raise
        except Exception as err:
            self._post(self._do_scan_failed, err, session=session)
            return
        _LOGGER.debug("Discovery stream ended")

    async def _run_scan_timer(self, session: int) -> None:
        await asyncio.sleep(self.config.scan_timeout)
        self._post(self._do_scan_expired, session=session)

    async def _do_device_found(self, device: DiscoveredDevice) -> None:
        if not self._machine.is_scanning:
            return
        self._log(f"Found: {device}")
        if not device.matches(self.config.device_name_token):
            return

        await self._stop_discovery()
        self._machine.transition(LinkEvent.DEVICE_MATCHED)
        self._begin_connect(device.address, device.name)

    async def _do_scan_expired(self) -> None:
        if not self._machine.is_scanning:
            return
        await self._stop_discovery()
        self._machine.transition(LinkEvent.SCAN_EXPIRED)
        await self._teardown(STATUS_NO_DEVICE)
        self._log(
            f"No device found after {self.config.scan_timeout:g}s", logging.WARNING
        )

    async def _do_scan_failed(self, err: Exception) -> None:
        if not self._machine.is_scanning:
            return
        await self._stop_discovery()
        self._machine.transition(LinkEvent.SCAN_FAILED)
        await self._teardown(STATUS_SCAN_FAILED)
        self._log(f"Scan error: {err}", logging.ERROR)

    async def _stop_discovery(self) -> None:
        timer, self._scan_timer = self._scan_timer, None
        discovery, self._discovery_task = self._discovery_task, None
        await _cancel_task(timer)
        await _cancel_task(discovery)

    # ------------------------------------------------------------------
    # Connecting
    # ------------------------------------------------------------------

    async def _do_connect(self, address: str, name: Optional[str]) -> None:
        if not address:
            self._log("Cannot connect: no device address", logging.WARNING)
            return

        phase = self._machine.state
        if phase in (ConnectionPhase.CONNECTING, ConnectionPhase.CONNECTED):
            self._log(f"Dropping connection to {self._store.session.device_address}")
            self._machine.transition(LinkEvent.DISCONNECT)
            await self._teardown(STATUS_DISCONNECTED)
        elif phase is ConnectionPhase.SCANNING:
            await self._stop_discovery()

        if not self._machine.transition(LinkEvent.CONNECT):
            self._log(f"Cannot connect while {self._machine.state}", logging.WARNING)
            return
        self._begin_connect(address, name)

    def _begin_connect(self, address: str, name: Optional[str]) -> None:
        """Start a connection attempt; the phase is already CONNECTING."""
        session = self._new_session()
        self._store.session.device_address = address
        self._store.session.device_name = name or address
        self._set_status(STATUS_CONNECTING)
        self._log(f"Connecting to {name or address}...")
        self._connect_task = asyncio.create_task(
            self._run_connect(address, session), name="smart_battery_connect"
        )

    async def _run_connect(self, address: str, session: int) -> None:
        try:
            channel = await self._transport.connect(address)
        except asyncio.CancelledError:
            raise
        except Exception as err:
            self._post(self._do_connect_failed, err, session=session)
            return
        # Posted without a session so a late channel is always closed
        self._post(self._do_connect_succeeded, channel, session)

    async def _do_connect_succeeded(self, channel: IChannel, session: int) -> None:
        if session != self._session_id or self._machine.state is not ConnectionPhase.CONNECTING:
            _LOGGER.debug("Closing channel from abandoned connection attempt")
            await _close_channel(channel)
            return

        self._connect_task = None
        self._machine.transition(LinkEvent.CONNECT_SUCCESS)
        self._channel = channel
        self._dispatcher.attach(channel)
        self._assembler.clear()
        self._store.session.manual_override = False
        self._set_status(STATUS_CONNECTED)
        self._log(f"Connected to {self._store.session.device_name}")

        self._reader_task = asyncio.create_task(
            self._run_reader(channel, session), name="smart_battery_reader"
        )
        assert self._poller is None or not self._poller.is_running, (
            "Previous poller still running"
        )
        self._poller = Poller(
            self.config.poll_interval,
            functools.partial(self._post_poll_tick, session),
            name="smart_battery_poller",
        )
        self._poller.start()
        self._log("Listening for data...", logging.DEBUG)

    async def _do_connect_failed(self, err: Exception) -> None:
        self._connect_task = None
        self._machine.transition(LinkEvent.CONNECT_FAILED)
        await self._teardown(STATUS_CONNECTION_FAILED)
        self._log(f"Connection failed: {err}", logging.ERROR)

    # ------------------------------------------------------------------
    # Connected
    # ------------------------------------------------------------------

    async def _run_reader(self, channel: IChannel, session: int) -> None:
        try:
            async for chunk in channel:
                self._post(self._do_chunk, chunk, session=session)
        except asyncio.CancelledError:
            raise
        except Exception as err:
            self._post(self._do_channel_lost, err, session=session)
            return
        self._post(self._do_channel_lost, None, session=session)

    async def _do_chunk(self, chunk: bytes) -> None:
        if not self._machine.is_connected:
            return
        for line in self._assembler.feed(chunk):
            self._handle_line(line)

    def _handle_line(self, line: str) -> None:
        self._log(f"Received: '{line}'", logging.DEBUG)
        events = self._codec.decode(line)
        if not events:
            self._log("Incomplete data format", logging.WARNING)
            return
        for event in events:
            if isinstance(event, ParseDegradedEvent):
                self._log(str(event), logging.WARNING)
        if self._store.device.apply_all(events):
            self._dirty = True

    async def _post_poll_tick(self, session: int) -> None:
        self._post(self._do_poll_tick, session=session)

    async def _do_poll_tick(self) -> None:
        if not self._machine.is_connected or self._store.session.manual_override:
            return
        await self._send(StatusCommand(), level=logging.DEBUG)

    async def _do_channel_lost(self, err: Optional[Exception]) -> None:
        if not self._machine.is_connected:
            return
        if err is None:
            self._log("Connection closed", logging.WARNING)
        else:
            self._log(f"Listen error: {err}", logging.ERROR)
        self._machine.transition(LinkEvent.CHANNEL_LOST)
        self._set_status(STATUS_DISCONNECTING)
        self._publish()
        await self._teardown(STATUS_DISCONNECTED)
        self._log("Disconnected")

    async def _send(self, command: Command, level: int = logging.INFO) -> bool:
        """Send a command; failures are logged, never raised."""
        try:
            await self._dispatcher.send(command)
        except SendFailedError as err:
            self._log(f"Send error: {err}", logging.WARNING)
            return False
        self._log(f"Sent: {command}", level)
        return True

    @require_connection("send command")
    async def _do_send_command(self, text: str) -> None:
        try:
            command = RawCommand(text)
        except ValueError as err:
            self._log(f"Invalid command: {err}", logging.WARNING)
            return
        await self._send(command)

    @require_connection("refresh")
    async def _do_refresh(self) -> None:
        await self._send(StatusCommand())

    @require_connection("change mode")
    async def _do_set_mode(self, mode: OperatingMode) -> None:
        self._store.session.manual_override = mode is OperatingMode.MANUAL
        self._dirty = True
        self._log(f"Mode changed to: {mode.value}")
        await self._send(SetModeCommand(mode))

    @require_connection("toggle relay")
    async def _do_toggle_relay(self, index: int) -> None:
        device = self._store.device
        try:
            relay = device.relay_address(index)
        except (TypeError, ValueError) as err:
            self._log(f"Invalid relay: {err}", logging.WARNING)
            return
        await self._switch_relay(relay, not device.relay(relay))

    @require_connection("switch relay")
    async def _do_set_battery_relay(self, battery: int, role: RelayRole, on: bool) -> None:
        try:
            relay = self._store.device.battery_relay(battery, role)
        except (TypeError, ValueError) as err:
            self._log(f"Invalid battery: {err}", logging.WARNING)
            return
        await self._switch_relay(relay, on)

    async def _switch_relay(self, relay: RelayAddress, on: bool) -> None:
        """Optimistically record a relay state; revert it if the send fails."""
        device = self._store.device
        previous = device.relay(relay)
        device.set_relay(relay, on)
        self._dirty = True
        if not await self._send(SetRelayCommand(relay, on)):
            device.set_relay(relay, previous)
            self._log(f"{relay} reverted to {'ON' if previous else 'OFF'}", logging.WARNING)

    async def _do_set_filter(self, filter_mode: FilterMode) -> None:
        if self._store.session.filter is filter_mode:
            return
        self._store.session.filter = filter_mode
        self._dirty = True
        if filter_mode is FilterMode.ALL:
            self._log("Showing all batteries")
        else:
            self._log(f"Showing {filter_mode.value} batteries")

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    async def _do_disconnect(self) -> None:
        if self._machine.state is ConnectionPhase.DISCONNECTED:
            _LOGGER.debug("Already disconnected")
            return
        self._machine.transition(LinkEvent.DISCONNECT)
        self._set_status(STATUS_DISCONNECTING)
        self._publish()
        await self._teardown(STATUS_DISCONNECTED)
        self._log("Disconnected")

    async def _teardown(self, status: str) -> None:
        """Release every resource of the current session and reset state.

        Runs on every path into DISCONNECTED.
        """
        self._new_session()

        await self._stop_discovery()
        connect_task, self._connect_task = self._connect_task, None
        await _cancel_task(connect_task)

        poller, self._poller = self._poller, None
        if poller is not None and poller.is_running:
            await poller.cancel()
            self._log("Polling stopped")

        reader, self._reader_task = self._reader_task, None
        await _cancel_task(reader)

        self._dispatcher.detach()
        channel, self._channel = self._channel, None
        if channel is not None:
            await _close_channel(channel)
        self._assembler.clear()

        self._store.reset(status)
        if self._machine.state is ConnectionPhase.DISCONNECTING:
            self._machine.transition(LinkEvent.TEARDOWN_COMPLETE)
        elif self._machine.state is not ConnectionPhase.DISCONNECTED:
            self._machine.force_state(ConnectionPhase.DISCONNECTED)
        self._dirty = True


async def _cancel_task(task: Optional[asyncio.Task]) -> None:
    """Cancel a background task and wait for it to finish."""
    if task is None or task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception as err:
        _LOGGER.debug("Task %s ended with error: %s", task.get_name(), err)


async def _close_channel(channel: IChannel) -> None:
    """Close a channel; errors are logged, never raised."""
    try:
        await channel.close()
    except LinkError as err:
        _LOGGER.warning("Error closing channel: %s", err)
    except Exception as err:
        _LOGGER.warning("Unexpected error closing channel: %s", err, exc_info=True)
